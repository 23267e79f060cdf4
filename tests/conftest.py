"""Shared fixtures for the botgen test suite."""

import pytest

from botgen.codegen.core.config import GeneratorConfig
from botgen.codegen.languages.typescript import TypeScriptGenerator
from botgen.codegen.translator import SchemaTranslator


@pytest.fixture
def config():
    return GeneratorConfig()


@pytest.fixture
def generator(config):
    return TypeScriptGenerator(config)


@pytest.fixture
def translator(generator, config):
    return SchemaTranslator(generator, config=config)


@pytest.fixture
def header(config):
    return config.header

