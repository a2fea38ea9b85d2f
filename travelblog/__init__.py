"""Australia travel blog: public blog, business directory and admin dashboard."""

__version__ = "1.0.0"
