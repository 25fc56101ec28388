"""Panel configurator: design intercom and call panels, manage projects and layouts."""

__version__ = "1.0.0"
