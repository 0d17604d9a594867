# flightsync/analysis/config.py

from dataclasses import dataclass

@dataclass
class PlaybackConfig:
    """
    Configuration for timeline compression and playback.

    Attributes
    ----------
    scale_factor
        Real milliseconds per compressed second of animation.
    min_duration
        Floor (s) on the compressed animation length.
    lead_in
        Delay (s) between computing the timeline and the animation start.
    min_multiplier
        Lower clamp on the distance-driven rate multiplier.
    max_multiplier
        Upper clamp on the distance-driven rate multiplier.
    tick_interval
        Wall-clock period (s) between frames of the terminal view.
    ready_timeout
        Longest wait (s) for the client's ready signal before playing anyway.
    """
    scale_factor:    float   = 30_000
    min_duration:    float   = 30.0
    lead_in:         float   = 2.0
    min_multiplier:  float   = 0.01
    max_multiplier:  float   = 100.0
    tick_interval:   float   = 0.1
    ready_timeout:   float   = 10.0

    @classmethod
    def default(cls):
        """Preset for a few hours of traffic (default thresholds)."""
        return cls()

    @classmethod
    def extended(cls):
        """Preset for a day of traffic."""
        return cls(scale_factor=100_000)

    @classmethod
    def overview(cls):
        """Preset for several days of traffic squeezed into a short loop."""
        return cls(scale_factor=1_000_000)

    @classmethod
    def preset(cls, name: str):
        """Look up a preset by its method name."""
        presets = {"default": cls.default, "extended": cls.extended, "overview": cls.overview}
        try:
            return presets[name]()
        except KeyError:
            raise ValueError(f"Unknown preset {name!r}, expected one of {sorted(presets)}") from None
