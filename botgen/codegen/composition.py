"""
Top-level composition of generated typings.

Builds the module trees for a bot or integration implementation and for
installed integration instances, and hand-composes the bot and
integration index files.
"""

import asyncio
import json
import posixpath
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence, Tuple, Union

from ..logging_config import get_logger
from .core.config import GeneratorConfig, load_config
from .core.errors import DefinitionError, NameCollisionError, PathCollisionError
from .core.module import File, Module, ModuleKind, relative_import
from .core.naming import to_camel_case, to_kebab_case, to_pascal_case
from .core.schema import SchemaResolver
from .languages.typescript import TypeScriptGenerator, create_typescript_generator
from .registry import SectionRegistry, get_registry
from .translator import SchemaTranslator

if TYPE_CHECKING:
    from ..definition import BotDefinition, Definition, InstalledIntegration, IntegrationDefinition

logger = get_logger(__name__)

BOT_SECTIONS = ("configuration", "events", "states")
INTEGRATION_SECTIONS = BOT_SECTIONS + ("actions", "channels", "secrets")
INSTANCE_SECTIONS = BOT_SECTIONS + ("actions", "channels")

SECTIONS_BY_KIND = {
    "bot": BOT_SECTIONS,
    "integration": INTEGRATION_SECTIONS,
    "instance": INSTANCE_SECTIONS,
}


def instance_identifier(name: str) -> str:
    """Identifier an installed instance is imported under in the bot index."""
    return to_camel_case(name)


def instance_type_name(name: str) -> str:
    """Aggregate type exposing an installed instance's typings."""
    return f"T{to_pascal_case(name)}"


def _resolve_generator(
    generator: Optional[TypeScriptGenerator], config: Optional[GeneratorConfig]
) -> Tuple[TypeScriptGenerator, GeneratorConfig]:
    if generator is None:
        generator = create_typescript_generator(config or load_config())
    return generator, config or generator.config


def _expect_kind(definition: Any, kind: str) -> None:
    actual = getattr(definition, "kind", None)
    if actual != kind:
        raise DefinitionError(f"Expected a {kind} definition, got {actual!r}", "kind")


async def _push_sections(
    root: Module,
    definition: Any,
    kind: str,
    generator: TypeScriptGenerator,
    config: GeneratorConfig,
    resolver: Optional[SchemaResolver],
    registry: Optional[SectionRegistry],
) -> Module:
    """Build every section of ``definition`` and attach each under its directory."""
    registry = registry or get_registry()
    translator = SchemaTranslator(generator, resolver, config)
    builders = [registry.create_builder(name, translator, config) for name in SECTIONS_BY_KIND[kind]]

    modules = await asyncio.gather(*(b.create(b.select(definition)) for b in builders))
    for builder, module in zip(builders, modules):
        module.unshift(builder.directory)
        root.push_dep(module)
    return root


async def create_implementation_module(
    definition: "Definition",
    generator: Optional[TypeScriptGenerator] = None,
    config: Optional[GeneratorConfig] = None,
    resolver: Optional[SchemaResolver] = None,
    registry: Optional[SectionRegistry] = None,
) -> Module:
    """
    Build the implementation typings tree of a bot or integration.

    The root is a re-export index over the sections of the definition's
    kind, each placed under its canonical directory.

    Args:
        definition: BotDefinition or IntegrationDefinition
        generator: Language generator, created from ``config`` when omitted
        config: Generation settings
        resolver: Coroutine resolving external ``$ref`` URIs
        registry: Section builders, the global registry when omitted

    Returns:
        Root module, not yet flattened
    """
    kind = getattr(definition, "kind", None)
    if kind not in ("bot", "integration"):
        raise DefinitionError(f"Cannot generate an implementation for kind {kind!r}", "kind")

    generator, config = _resolve_generator(generator, config)
    root = Module.reexport("Implementation", path=config.index_file, renderer=generator)
    return await _push_sections(root, definition, kind, generator, config, resolver, registry)


async def generate_typings(
    definition: "Definition", implementation_path: str, **options: Any
) -> List[File]:
    """
    Generate the implementation typings of a definition under ``implementation_path``.

    Args:
        definition: BotDefinition or IntegrationDefinition
        implementation_path: Directory the typings are placed in
        **options: Passed to ``create_implementation_module``

    Returns:
        Ordered list of generated files
    """
    module = await create_implementation_module(definition, **options)
    module.unshift(implementation_path)
    files = module.flatten()
    logger.info(
        "Generated %d %s implementation file(s) under %s",
        len(files),
        definition.kind,
        implementation_path,
    )
    return files


async def generate_bot_implementation_typings(
    bot: "BotDefinition", implementation_path: str, **options: Any
) -> List[File]:
    _expect_kind(bot, "bot")
    return await generate_typings(bot, implementation_path, **options)


async def generate_integration_implementation_typings(
    integration: "IntegrationDefinition", implementation_path: str, **options: Any
) -> List[File]:
    _expect_kind(integration, "integration")
    return await generate_typings(integration, implementation_path, **options)


async def generate_integration_index(
    implementation_path: str,
    generator: Optional[TypeScriptGenerator] = None,
    config: Optional[GeneratorConfig] = None,
) -> List[File]:
    """Generate the package index re-exporting an integration's implementation typings."""
    generator, config = _resolve_generator(generator, config)
    target = posixpath.join(implementation_path, config.index_file)
    content = generator.render_integration_index([relative_import(config.index_file, target)])
    return Module("Index", path=config.index_file, content=content).flatten()


async def generate_integration_instance(
    instance: "InstalledIntegration",
    install_path: str,
    generator: Optional[TypeScriptGenerator] = None,
    config: Optional[GeneratorConfig] = None,
    resolver: Optional[SchemaResolver] = None,
    registry: Optional[SectionRegistry] = None,
) -> List[File]:
    """
    Generate the typings of an installed integration instance.

    Files go under ``<install_path>/<kebab-name>/``. The index declares the
    instance's name, version and id, re-exports its sections and declares
    the ``T<Name>`` aggregate. A sidecar JSON record with the same metadata
    is appended last.

    Returns:
        Ordered list of generated files, sidecar included
    """
    _expect_kind(instance, "instance")
    generator, config = _resolve_generator(generator, config)

    type_name = instance_type_name(instance.name)
    metadata_source = generator.render_instance_metadata(instance.name, instance.version, instance.id)
    root = Module(
        type_name,
        path=config.index_file,
        content=metadata_source,
        names=generator.exported_names(metadata_source),
        kind=ModuleKind.MIXED,
        aggregate=type_name,
        renderer=generator,
    )
    await _push_sections(root, instance, "instance", generator, config, resolver, registry)

    dirname = to_kebab_case(instance.name)
    root.unshift(install_path, dirname)
    files = root.flatten()

    metadata_path = posixpath.normpath(
        posixpath.join(install_path, dirname, config.instance_metadata_file)
    ).lstrip("/")
    if any(f.path == metadata_path for f in files):
        raise PathCollisionError(metadata_path, [type_name, "instance metadata"])

    metadata = {"name": instance.name, "version": instance.version, "id": instance.id}
    files.append(File(path=metadata_path, content=json.dumps(metadata, indent=2)))

    logger.info("Generated %d file(s) for integration %s", len(files), instance.name)
    return files


async def generate_bot_index(
    implementation_path: str,
    install_path: str,
    instances: Sequence[Union[str, "InstalledIntegration"]],
    generator: Optional[TypeScriptGenerator] = None,
    config: Optional[GeneratorConfig] = None,
) -> List[File]:
    """
    Generate the bot index tying installed integrations to the bot typings.

    Args:
        implementation_path: Directory of the bot implementation typings
        install_path: Directory integration instances are installed in
        instances: Installed instances, or their names

    Returns:
        A single ``index.ts`` file

    Raises:
        NameCollisionError: Two instances map to the same identifier
    """
    generator, config = _resolve_generator(generator, config)

    seen: Dict[str, str] = {}
    entries = []
    for instance in instances:
        name = instance if isinstance(instance, str) else instance.name
        ident = instance_identifier(name)
        if ident in seen:
            raise NameCollisionError(ident, [seen[ident], name])
        seen[ident] = name

        target = posixpath.join(install_path, to_kebab_case(name), config.index_file)
        entries.append(
            {
                "ident": ident,
                "path": relative_import(config.index_file, target),
                "type_name": instance_type_name(name),
            }
        )

    implementation = relative_import(
        config.index_file, posixpath.join(implementation_path, config.index_file)
    )
    content = generator.render_bot_index(implementation, entries)
    return Module("Bot", path=config.index_file, content=content).flatten()
