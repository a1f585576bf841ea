"""
Shadow engine components.

- **sun_position**: ``compute_sun_position()``, ``solar_times()``
- **sun_path**: ``SunPath``, ``sun_path()``, ``preset_date()``
- **terrain**: ``build_grid()``
- **shadows**: ``compute_shadow_mask()``, ``cast_shadows()``, ``compute_instant_shadows()``
- **sun_hours**: ``iter_sun_hours()``, ``aggregate_sun_hours()``, ``compute_sun_hours()``,
  ``solar_daylight_hours()``
- **accuracy**: ``assess_accuracy()``, ``validate_result()``
- **facades**: ``is_facade_illuminated()``, ``compute_facade_exposure()``
"""

__all__ = ["sun_position", "sun_path", "terrain", "shadows", "sun_hours", "accuracy", "facades"]
