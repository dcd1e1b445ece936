import asyncio

import pytest

from sensehat.errors import CombinedError, ConfigValidationError, RegistrationError, ResourceNotFoundError
from sensehat.module import Module
from sensehat.plugins import lps25h
from sensehat.registry import ModelRegistry, Registration
from sensehat.resource import SENSOR_API, ComponentConfig, Model, Resource, ResourceName

ATTRS = {"board": "pi", "i2c_bus": "bus1"}


@pytest.fixture
def module():
    registry = ModelRegistry()
    registry.register(lps25h.get_plugin())
    mod = Module("/tmp/lps25h.sock", registry)
    mod.add_model_from_registry(SENSOR_API, lps25h.MODEL)
    mod.start()
    return mod


def _config(attrs=ATTRS, name="pressure"):
    return ComponentConfig(name, SENSOR_API, lps25h.MODEL, dict(attrs))


def test_add_unregistered_model():
    mod = Module("/tmp/x.sock", ModelRegistry())
    with pytest.raises(RegistrationError):
        mod.add_model_from_registry(SENSOR_API, lps25h.MODEL)


def test_start_without_models():
    with pytest.raises(RegistrationError):
        Module("/tmp/x.sock", ModelRegistry()).start()


def test_models_cannot_be_added_after_start(module):
    with pytest.raises(RegistrationError):
        module.add_model_from_registry(SENSOR_API, lps25h.MODEL)


def test_validate_config(module):
    assert module.validate_config(_config()) == ["pi"]
    with pytest.raises(ConfigValidationError):
        module.validate_config(_config({"board": "pi"}))


def test_add_resource_and_read(module, deps, fake_bus):
    sensor = module.add_resource(_config(), deps)
    assert module.get_resource(ResourceName(SENSOR_API, "pressure")) is sensor
    assert asyncio.run(module.readings(sensor.name)) == {"hello": "world"}
    assert [call[0] for call in fake_bus.calls] == ["open", "write", "close"]


def test_failed_construction_leaves_no_resource(module, deps, fake_bus):
    fake_bus.open_error = OSError("no bus")
    with pytest.raises(OSError):
        module.add_resource(_config(), deps)
    with pytest.raises(ResourceNotFoundError):
        module.get_resource(ResourceName(SENSOR_API, "pressure"))


def test_reconfigure_always_rebuilds(module, deps, fake_bus):
    first = module.add_resource(_config(), deps)
    second = module.reconfigure_resource(_config({**ATTRS, "i2c_addr": 0x5D}), deps)
    assert second is not first
    assert second.addr == 0x5D
    assert module.get_resource(second.name) is second


def test_remove_resource(module, deps):
    sensor = module.add_resource(_config(), deps)
    module.remove_resource(sensor.name)
    with pytest.raises(ResourceNotFoundError):
        module.remove_resource(sensor.name)


def test_unknown_model(module):
    config = ComponentConfig("x", SENSOR_API, Model("acme", "sensor", "nope"), {})
    with pytest.raises(RegistrationError):
        module.add_resource(config)


class BrokenClose(Resource):
    def close(self):
        raise RuntimeError(f"cannot close {self.name.name}")


def test_close_collects_errors():
    model = Model("acme", "sensor", "broken")
    registry = ModelRegistry()
    registry.register(Registration(SENSOR_API, model, lambda config, deps: BrokenClose(config.resource_name())))
    mod = Module("/tmp/x.sock", registry)
    mod.add_model_from_registry(SENSOR_API, model)
    mod.start()
    mod.add_resource(ComponentConfig("a", SENSOR_API, model))
    mod.add_resource(ComponentConfig("b", SENSOR_API, model))
    with pytest.raises(CombinedError) as info:
        mod.close()
    assert len(info.value.errors) == 2
    assert not mod.started


def test_run_until_shutdown(module):
    async def scenario():
        task = asyncio.ensure_future(module.run_until_shutdown())
        await asyncio.sleep(0)
        module.request_shutdown()
        await asyncio.wait_for(task, timeout=1.0)

    asyncio.run(scenario())
    module.close()


def test_readings_on_non_sensor():
    model = Model("acme", "sensor", "plain")
    registry = ModelRegistry()
    registry.register(Registration(SENSOR_API, model, lambda config, deps: Resource(config.resource_name())))
    mod = Module("/tmp/x.sock", registry)
    mod.add_model_from_registry(SENSOR_API, model)
    resource = mod.add_resource(ComponentConfig("plain", SENSOR_API, model))
    with pytest.raises(ResourceNotFoundError):
        asyncio.run(mod.readings(resource.name))


def test_shutdown_requested_before_run(module):
    module.request_shutdown()

    async def scenario():
        await asyncio.wait_for(module.run_until_shutdown(), timeout=1.0)

    asyncio.run(scenario())
    module.close()
