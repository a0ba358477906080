"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import sys
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local typefit package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of typefit modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("typefit"):
        del sys.modules[module_name]


USER_TYPES = """\
export interface BasicUser {
  id: number;
  name: string;
  email: string;
}

export interface UserProfile {
  avatar: string;
  bio: string;
  socialLinks: string[];
}

export interface User {
  id: number;
  name: string;
  profile: UserProfile;
}
"""

SETTINGS_TYPES = """\
export type Settings = {
  theme: 'light' | 'dark' | 'auto';
  notifications?: boolean;
  layout: { columns: number; dense?: boolean };
};
"""

APP_SOURCE = """\
import { BasicUser } from './types/user';

const user = { id: 1, name: 'Ada', email: 'ada@example.com' };
const partial = { id: 2, name: 'Grace' };
const member = { id: 3, name: 'Linus', profile: { bio: 'kernel' } };
const typed: BasicUser = { id: 4, name: 'Typed', email: 't@example.com' };
const empty = {};
"""


@pytest.fixture
def ts_project(tmp_path: Path) -> Path:
    """A small TypeScript project with declared types and untyped literals."""
    root = tmp_path / "project"
    (root / "src" / "types").mkdir(parents=True)
    (root / "src" / "types" / "user.ts").write_text(USER_TYPES)
    (root / "src" / "types" / "settings.ts").write_text(SETTINGS_TYPES)
    (root / "src" / "app.ts").write_text(APP_SOURCE)
    (root / "package.json").write_text('{"name": "project"}\n')

    # Pruned by default
    (root / "node_modules" / "lib").mkdir(parents=True)
    (root / "node_modules" / "lib" / "index.d.ts").write_text(
        "export interface Vendored { id: number; }\n"
    )
    return root
