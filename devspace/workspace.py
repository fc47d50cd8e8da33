"""Wires the store, the GitHub client and the managers together."""

from dataclasses import dataclass

from devspace.clients.github import GitHubClient
from devspace.config import Settings, get_settings
from devspace.managers import ConnectionManager, RosterManager, TaskManager, default_presets
from devspace.store import LocalStore, open_store


@dataclass
class Workspace:
    store: LocalStore
    tasks: TaskManager
    roster: RosterManager
    connection: ConnectionManager

    @classmethod
    def build(
        cls,
        settings: Settings | None = None,
        store: LocalStore | None = None,
        client: GitHubClient | None = None,
    ) -> "Workspace":
        settings = settings or get_settings()
        store = store or open_store(settings)
        client = client or GitHubClient.from_settings(settings)
        tasks = TaskManager(store)
        roster = RosterManager(store, tasks, presets=default_presets(settings))
        return cls(
            store=store,
            tasks=tasks,
            roster=roster,
            connection=ConnectionManager(client, store),
        )
