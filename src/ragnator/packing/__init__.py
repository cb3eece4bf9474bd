from .manifest import build_manifest
from .packer import BundlePacker, bundle_name

__all__ = ["BundlePacker", "build_manifest", "bundle_name"]
