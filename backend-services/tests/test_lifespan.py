import json

import pytest

from conftest import sample_config_data


@pytest.mark.asyncio
async def test_lifespan_loads_configuration_from_settings(tmp_path):
    from restified import app_lifespan, create_app
    from utils.config_util import GatewaySettings
    from utils.tracing_util import NoopObserver

    path = tmp_path / 'configuration.json'
    path.write_text(json.dumps(sample_config_data()), encoding='utf-8')
    app = create_app(settings=GatewaySettings(restified_config_file=str(path)), observer=NoopObserver())
    assert app.state.gateway is None

    async with app_lifespan(app):
        assert len(app.state.gateway.config.restified_endpoints) == 2


@pytest.mark.asyncio
async def test_invalid_configuration_aborts_startup(tmp_path):
    from restified import app_lifespan, create_app
    from utils.config_util import ConfigurationError, GatewaySettings
    from utils.tracing_util import NoopObserver

    path = tmp_path / 'configuration.json'
    path.write_text(json.dumps({'headers': {}, 'restifiedEndpoints': []}), encoding='utf-8')
    app = create_app(settings=GatewaySettings(restified_config_file=str(path)), observer=NoopObserver())

    with pytest.raises(ConfigurationError):
        async with app_lifespan(app):
            pass


@pytest.mark.asyncio
async def test_injected_configuration_skips_loading(config, settings):
    from restified import app_lifespan, create_app
    from utils.tracing_util import NoopObserver

    app = create_app(config=config, settings=settings, observer=NoopObserver())
    gateway = app.state.gateway
    async with app_lifespan(app):
        assert app.state.gateway is gateway
