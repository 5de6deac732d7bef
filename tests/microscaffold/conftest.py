"""Shared fixtures: a workspace with the child-test-manage template."""

import json
from pathlib import Path

import pytest

from microscaffold.app_spec import AppSpec
from microscaffold.settings import ScaffoldSettings

TEMPLATE_FILES = {
    "package.json": """\
{
  "name": "child-test-manage",
  "version": "0.0.1",
  "author": {
    "name": "test"
  },
  "scripts": {
    "dev": "vite",
    "test": "vitest"
  }
}
""",
    "vite.config.ts": """\
import { defineConfig } from 'vite'
import { createPresets } from './presets'

export default defineConfig({
  base: '/test/',
  plugins: createPresets(),
  server: {
    port: 6015,
    origin: 'http://localhost:6015',
    cors: true,
  },
})
""",
    "presets/index.ts": """\
import qiankun from 'vite-plugin-qiankun'

export function createPresets() {
  return [qiankun('test', { useDevMode: true })]
}
""",
    "index.html": """\
<!DOCTYPE html>
<html lang="zh-CN">
  <head>
    <meta charset="UTF-8" />
    <title>测试微应用</title>
    <style>
      #test {
        height: 100%;
      }
    </style>
  </head>
  <body>
    <div id="test"></div>
    <script type="module" src="/src/main.ts"></script>
  </body>
</html>
""",
    "src/main.ts": """\
function render(props = {}) {
  const { container } = props
  app.mount(container ? container.querySelector('#test') : '#test')
}
""",
    "src/plugins/router.ts": """\
const router = createRouter({
  history: createWebHistory(qiankunWindow.__POWERED_BY_QIANKUN__ ? '/test' : '/test/'),
  routes,
})
""",
    "src/App.vue": "<template><router-view /></template>\n",
    # Excluded from clones
    "node_modules/vue/index.js": "module.exports = {}\n",
    "dist/index.html": "<html></html>\n",
    ".git/HEAD": "ref: refs/heads/main\n",
    ".eslintcache": "{}\n",
    "vite.config.ts.timestamp-1700000000000.mjs": "export default {}\n",
}

HOST_CONFIG = """\
export const microSet = [
  { name: "test", port: "6015" }, // 测试微应用
]

export default {
  microSet,
}
"""

ROOT_MANIFEST = {
    "name": "workspace",
    "private": True,
    "scripts": {"test": "yarn workspace child-test-manage dev"},
    "workspaces": ["projects/child-test-manage", "projects/main-portal"],
}


def write_files(root: Path, files: dict[str, str]) -> None:
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Workspace root with template, host registration file and package.json."""
    root = tmp_path / "workspace"
    write_files(root / "projects" / "child-test-manage", TEMPLATE_FILES)
    write_files(root, {"projects/main-portal/src/config.js": HOST_CONFIG})
    (root / "package.json").write_text(
        json.dumps(ROOT_MANIFEST, indent=2) + "\n", encoding="utf-8"
    )
    return root


@pytest.fixture
def settings(workspace: Path) -> ScaffoldSettings:
    return ScaffoldSettings(workspace_root=workspace)


@pytest.fixture
def exam_spec() -> AppSpec:
    return AppSpec(
        name="exam", package_name="child-exam-manage", port="6003", title="考试管理"
    )
