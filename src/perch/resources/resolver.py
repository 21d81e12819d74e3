"""Resource resolution by base name.

A page refers to its resources by name only (``content``, ``head``, ...);
the file behind a name may carry any extension. The resolver finds that
extension, or reports absence. Absence is never an error: callers skip the
optional piece.

When several files share a base name, the store's sorted listing makes the
choice deterministic (alphabetically first extension). ``strict`` policy
refuses the ambiguity instead.
"""

import logging
import posixpath

from perch.config import ResolvePolicy
from perch.errors import AmbiguousResource
from perch.resources.store import ResourceStore

logger = logging.getLogger("perch.resources")


def resolve_extension(
    store: ResourceStore,
    directory: str,
    base: str,
    *,
    policy: ResolvePolicy = "first",
) -> str | None:
    """Return the extension of the file named *base* in *directory*.

    Only files whose stem equals *base* exactly match: ``content.html``
    matches ``content``, ``content.old.html`` does not.

    Args:
        store: Where to look.
        directory: Directory to search (posix path).
        base: Base name without extension.
        policy: ``"first"`` picks the alphabetically first match;
            ``"strict"`` raises ``AmbiguousResource`` on several matches.

    Returns:
        The extension without the dot, or ``None`` if nothing matches.
    """
    prefix = posixpath.join(directory, base)
    # Stores list bare file names from the leaf directory of *prefix*
    leaf = posixpath.basename(prefix)
    stem_length = len(leaf) + 1
    extensions = [
        name[stem_length:]
        for name in store.list_matching(prefix)
        if len(name) > stem_length and "." not in name[stem_length:]
    ]

    if not extensions:
        logger.debug("No resource %r in %s", base, directory)
        return None

    if len(extensions) > 1 and policy == "strict":
        raise AmbiguousResource(prefix, tuple(f"{leaf}.{ext}" for ext in extensions))

    return extensions[0]


class Resolver:
    """Resolve resources against one store with a fixed policy.

    Returns full resource paths rather than bare extensions, which is what
    the view needs to render them.
    """

    __slots__ = ("policy", "store")

    def __init__(self, store: ResourceStore, policy: ResolvePolicy = "first") -> None:
        self.store = store
        self.policy: ResolvePolicy = policy

    def extension(self, directory: str, base: str) -> str | None:
        return resolve_extension(self.store, directory, base, policy=self.policy)

    def resolve(self, directory: str, base: str) -> str | None:
        """Return ``"<directory>/<base>.<ext>"`` or ``None``."""
        ext = self.extension(directory, base)
        if ext is None:
            return None
        path = posixpath.join(directory, f"{base}.{ext}")
        logger.debug("Resolved %r to %s", base, path)
        return path

    def resolve_path(self, path: str) -> str | None:
        """Resolve a full extensionless path such as ``/srv/scripts/app``."""
        directory, base = posixpath.split(path)
        return self.resolve(directory, base)
