"""Kida environment setup for views.

Creates a kida Environment whose templates come from two places:

- ``@perch/<name>``: perch's packaged defaults (shell, header)
- any other name: a path read through the view's ``ResourceStore``

A fresh environment is built per view; compiled templates are not shared
between responses.
"""

from kida import ChoiceLoader, Environment, FunctionLoader, PackageLoader, PrefixLoader

from perch.config import PACKAGED_PREFIX, ViewConfig
from perch.resources.store import ResourceStore


def create_environment(config: ViewConfig, store: ResourceStore) -> Environment:
    """Create a kida Environment bound to *store*.

    Template names outside the ``@perch`` prefix are resource paths;
    ``env.get_template("/srv/pages/home/content.html")`` reads that file
    from the store.
    """

    def load_from_store(name: str) -> tuple[str, str] | None:
        if not store.exists(name):
            return None
        return store.read_all(name).decode(config.encoding), name

    loader = ChoiceLoader(
        [
            PrefixLoader({PACKAGED_PREFIX: PackageLoader("perch", "templates")}),
            FunctionLoader(load_from_store),
        ]
    )
    return Environment(
        loader=loader,
        auto_reload=False,
        bytecode_cache=False,
        autoescape=config.autoescape,
        trim_blocks=config.trim_blocks,
        lstrip_blocks=config.lstrip_blocks,
    )
