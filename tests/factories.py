"""Test factories using factory_boy."""

from pathlib import PurePosixPath

import factory

from codeswitch.core.models.repository import Index, RepoEntry


class RepoEntryFactory(factory.Factory):
    """Factory for creating RepoEntry instances."""

    class Meta:
        model = RepoEntry

    path = factory.Sequence(lambda n: f"/code/org{n}/repo{n}")
    name = factory.LazyAttribute(lambda o: PurePosixPath(o.path).name)


class IndexFactory(factory.Factory):
    """Factory for creating Index instances."""

    class Meta:
        model = Index

    root = "/code"
    entries = factory.LazyFunction(lambda: (RepoEntryFactory(), RepoEntryFactory()))
    signature = factory.Sequence(lambda n: 1_700_000_000_000_000_000 + n)


def make_index(*paths: str, root: str = "/code") -> Index:
    """Build an index holding one entry per path, in the given order."""
    return IndexFactory(
        root=root,
        entries=tuple(RepoEntryFactory(path=path) for path in paths),
    )
