"""Launch Copycat: relaunch a token on pump.fun from existing metadata."""

__version__ = "0.1.0"
