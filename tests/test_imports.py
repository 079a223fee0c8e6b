"""
Smoke tests to verify all modules can be imported.
"""

def test_import_fitpool_core():
    import fitpool_core
    assert hasattr(fitpool_core, '__version__')


def test_public_exports():
    import fitpool_core
    for name in fitpool_core.__all__:
        assert hasattr(fitpool_core, name)


def test_config_helpers_exported_at_package_level():
    import fitpool_core
    from fitpool_core.config import load_config, save_config
    assert fitpool_core.load_config is load_config
    assert fitpool_core.save_config is save_config
