"""Core subsystems: graph assembly, configuration, logging."""
