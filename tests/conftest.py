import pytest

from lonelyless import CoefficientSet, Configuration, ModelParameters, RegionAdjustment


@pytest.fixture
def params():
    return ModelParameters()


@pytest.fixture
def flat_coefficients():
    """All-zero coefficients: both alternatives equally attractive."""
    return CoefficientSet(label="Flat")


@pytest.fixture
def simple_coefficients():
    return CoefficientSet(
        label="Simple",
        asc_programme=0.5,
        asc_opt_out=-0.5,
        attribute_weights={
            'support_type': {'community_engagement': 0.4},
            'frequency': {'weekly': 0.3},
            'accessibility': {'at_home': 0.2},
        },
        cost_weight=-0.001,
    )


@pytest.fixture
def regions():
    return RegionAdjustment({'NSW': 1.10, 'QLD': 1.00})


@pytest.fixture
def base_config():
    return Configuration(
        support_type='community_engagement',
        frequency='weekly',
        unit_cost=50.0,
        participants_per_group=100,
        number_of_groups=5,
        duration_periods=12,
        include_opportunity_cost=False,
    )
