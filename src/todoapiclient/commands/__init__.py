"""Built-in ``todoapi`` sub-commands.

* :mod:`~todoapiclient.commands.tasks` -- ``list``, ``get``, ``add``,
  ``update`` and ``delete`` against the configured API.
* :mod:`~todoapiclient.commands.config` -- ``config show|set|path|reset``.
"""
