"""Shared test fixtures and engine doubles."""

import shutil
import tempfile
from unittest import mock

import pytest

from AssetMill.config import AssetMillConfig
from AssetMill.core import Filesystem
from AssetMill.engines import FilterEngine
from AssetMill.factory import FilterFactory


class AppendFilter(FilterEngine):
    """Append a suffix on dump; record hook calls in ``calls`` if given."""

    def __init__(self, suffix, calls=None):
        self.suffix = suffix
        self.calls = calls

    def filter_load(self, context):
        if self.calls is not None:
            self.calls.append(f"load:{self.suffix}")

    def filter_dump(self, context):
        if self.calls is not None:
            self.calls.append(f"dump:{self.suffix}")
        context.set_content(context.get_content() + self.suffix)


class ExplodingFilter(FilterEngine):
    def __init__(self, phase="dump"):
        self.phase = phase

    def filter_load(self, context):
        if self.phase == "load":
            raise RuntimeError("load exploded")

    def filter_dump(self, context):
        raise RuntimeError("dump exploded")


def make_files(contents=b"", last_modified=1368422603):
    """Filesystem double returning fixed contents."""
    files = mock.Mock(spec=Filesystem)
    files.last_modified.return_value = last_modified
    files.get_contents.return_value = contents
    files.get_remote.return_value = contents
    return files


def make_factory(environment="testing", **registry):
    config = AssetMillConfig()
    config.environment = environment
    return FilterFactory(config, registry=registry or None)


@pytest.fixture
def tmp_dir():
    d = tempfile.mkdtemp()
    yield d
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def default_config():
    return AssetMillConfig()
