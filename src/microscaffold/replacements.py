"""Per-file replacement maps: template placeholder literal → new app literal.

Each builder is a pure function of the template descriptor and the app spec.
Keys are exact source snippets, quoting included, so unrelated occurrences of
the template name (e.g. a "test" script in package.json) stay untouched.
"""

from __future__ import annotations

from .app_spec import AppSpec
from .settings import TemplateDescriptor


def package_manifest(old: TemplateDescriptor, new: AppSpec) -> dict[str, str]:
    """package.json: the package name only."""
    return {f'"name": "{old.package_name}"': f'"name": "{new.package_name}"'}


def build_config(old: TemplateDescriptor, new: AppSpec) -> dict[str, str]:
    """vite.config: base path, dev-server origin and port."""
    return {
        f"base: '/{old.name}/'": f"base: '/{new.name}/'",
        f"base: '/{old.name}'": f"base: '/{new.name}'",
        f"origin: 'http://localhost:{old.port}'": f"origin: 'http://localhost:{new.port}'",
        f"port: {old.port}": f"port: {new.port}",
    }


def presets(old: TemplateDescriptor, new: AppSpec) -> dict[str, str]:
    """presets/index: the qiankun registration name."""
    return {
        f"qiankun('{old.name}'": f"qiankun('{new.name}'",
        f'qiankun("{old.name}"': f'qiankun("{new.name}"',
    }


def html_entry(old: TemplateDescriptor, new: AppSpec) -> dict[str, str]:
    """index.html: document title, root anchor id and its CSS selector."""
    return {
        f"<title>{old.title}</title>": f"<title>{new.title}</title>",
        f'<div id="{old.name}">': f'<div id="{new.name}">',
        f"#{old.name} {{": f"#{new.name} {{",
    }


def entry_module(old: TemplateDescriptor, new: AppSpec) -> dict[str, str]:
    """src/main: the mount selector."""
    return {
        f"'#{old.name}'": f"'#{new.name}'",
        f'"#{old.name}"': f'"#{new.name}"',
    }


def router_module(old: TemplateDescriptor, new: AppSpec) -> dict[str, str]:
    """src/plugins/router: history base, with and without trailing slash."""
    return {
        f"? '/{old.name}' : '/{old.name}/'": f"? '/{new.name}' : '/{new.name}/'",
        f"? '/{old.name}/' : '/{old.name}'": f"? '/{new.name}/' : '/{new.name}'",
        f"base: '/{old.name}'": f"base: '/{new.name}'",
        f"base: '/{old.name}/'": f"base: '/{new.name}/'",
    }
