"""iManage: data layer and HTTP API for a small-business management app."""

__version__ = "0.4.0"
