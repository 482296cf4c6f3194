from dataclasses import dataclass

import pytest

from lattesim.ConfigBase import ConfigBase, config_field
from lattesim.Settings import Settings
from lattesim.flow.fluid import FluidFlowConfig


@dataclass
class BrushConfig(ConfigBase):
    radius: float = config_field(0.06, min=0.0005, max=0.5, description="Brush radius in UV")
    seed: int = config_field(0, fixed=True)


def test_watch_any_change():
    config = FluidFlowConfig()
    calls = []
    unwatch = config.watch(lambda: calls.append(1))

    config.viscosity = 0.001
    config.prs_iterations = 20
    assert len(calls) == 2

    unwatch()
    config.viscosity = 0.002
    assert len(calls) == 2


def test_watch_attribute_passes_value():
    config = FluidFlowConfig()
    values = []
    config.watch(values.append, 'resolution')
    config.resolution = 128
    config.viscosity = 0.001
    assert values == [128]


def test_watch_unknown_attribute():
    with pytest.raises(AttributeError):
        FluidFlowConfig().watch(lambda value: None, 'not_a_field')


def test_undeclared_attribute_rejected():
    config = FluidFlowConfig()
    with pytest.raises(AttributeError):
        config.viscocity = 0.1


def test_fixed_field_locked_after_init():
    config = BrushConfig(seed=7)
    assert config.seed == 7
    config.radius = 0.1
    with pytest.raises(AttributeError):
        config.seed = 8


def test_out_of_range_warns():
    with pytest.warns(UserWarning):
        BrushConfig(radius=2.0)


def test_info_labels_and_ranges():
    config = FluidFlowConfig()
    info = config.info('prs_iterations')
    assert info['label'] == 'Pressure Iterations'
    assert info['min'] == 0
    assert info['max'] == 200
    assert info['default'] == 40

    assert config.info('dye_dissipation')['label'] == 'Dye Dissipation'
    assert config.info()['boundary']['fixed'] is False

    with pytest.raises(AttributeError):
        config.info('nope')


def test_settings_round_trip(tmp_path):
    settings = Settings()
    settings.fluid.viscosity = 0.002
    settings.fluid.boundary = False
    settings.pour.spacing = 0.5
    settings.pour.infinite_pour = True

    path = tmp_path / 'settings.json'
    settings.save(str(path))
    loaded = Settings.load(str(path))

    assert isinstance(loaded.fluid, FluidFlowConfig)
    assert loaded == settings


def test_settings_ignores_unknown_keys():
    loaded = Settings.deserialize({'fluid': {'resolution': 32, 'legacy': 1}, 'other': {}}, Settings)
    assert loaded.fluid.resolution == 32
    assert loaded.pour.spacing == 0.25
