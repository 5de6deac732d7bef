"""microscaffold - creates micro-frontend sub-applications from a workspace template.

Clones the reference template under projects/, rewrites its identity strings
(name, package name, port, title), registers the new app in the host
application's route table and adds it to the root package.json workspaces.

Package entry point. Exports the version string only; the CLI lives in main.py.
"""

__version__ = "0.1.0"
