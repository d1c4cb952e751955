"""Site Capture API: screenshots and logos of websites over HTTP"""

__version__ = "1.0.0"
