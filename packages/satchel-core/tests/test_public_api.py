def test_api_exports_exist():
    from satchel.core.api import (
        Bundle,
        BundleCollection,
        BundleDescriptor,
        BundleFactory,
        FileSearch,
        FileSystem,
        MissingAssetError,
        PathNotFoundError,
        DescriptorFormatError,
        Settings,
        list_bundle_kinds,
        read_descriptor,
        register_bundle_kind,
    )

    assert Bundle is not None
    assert BundleCollection is not None
    assert BundleDescriptor is not None
    assert BundleFactory is not None
    assert FileSearch is not None
    assert FileSystem is not None
    assert Settings is not None
    assert issubclass(MissingAssetError, FileNotFoundError)
    assert issubclass(PathNotFoundError, FileNotFoundError)
    assert issubclass(DescriptorFormatError, ValueError)
    assert callable(read_descriptor)
    assert callable(register_bundle_kind)
    assert {"script", "stylesheet", "htmltemplate"} <= set(list_bundle_kinds())


def test_no_ambiguous_top_level_modules_exist():
    """Strict import rule: public API lives under satchel.core.api only."""
    import importlib.util

    assert importlib.util.find_spec("satchel.api") is None
    assert importlib.util.find_spec("satchel.builtins") is None
