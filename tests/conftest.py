"""Test-runner configuration for Hypothesis.

On a clean checkout Hypothesis builds its Unicode character cache during the
first ``st.characters`` draw, which trips the ``too_slow`` health check.
"""

from hypothesis import HealthCheck, settings

settings.register_profile("default", suppress_health_check=[HealthCheck.too_slow])
settings.load_profile("default")
