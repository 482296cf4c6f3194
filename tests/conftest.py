import numpy as np
import pytest

from lattesim.flow.fluid import FluidFlow, FluidFlowConfig
from lattesim.pour import PourConfig


@pytest.fixture
def config():
    return FluidFlowConfig(resolution=64)


@pytest.fixture
def fluid(config):
    flow = FluidFlow(config)
    flow.allocate()
    yield flow
    flow.deallocate()


@pytest.fixture
def still_fluid():
    """No projection and no viscosity, dye only moves with injected velocity."""
    flow = FluidFlow(FluidFlowConfig(resolution=64, prs_iterations=0, viscosity=0.0))
    flow.allocate()
    yield flow
    flow.deallocate()


@pytest.fixture
def pour_config():
    return PourConfig()


@pytest.fixture
def rng():
    return np.random.default_rng(1234)

