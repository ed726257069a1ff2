"""Integration test: scan -> fix -> rescan -> undo."""

from __future__ import annotations

from pathlib import Path

import pytest

from blankfix.core.config import BlankfixConfig
from blankfix.core.models import FixKind, ScanResult
from blankfix.fix.engine import RepairEngine
from blankfix.fix.undo import RollbackManager


@pytest.fixture
def blank_screen_project(tmp_path: Path) -> Path:
    """A small Vite-style app that renders a blank screen."""
    src = tmp_path / "src"
    src.mkdir()
    (tmp_path / "package.json").write_text('{"name": "demo", "private": true}\n')

    (src / "main.jsx").write_text("""\
import React from 'react';
import ReactDOM from 'react-dom/client';
import App from './App';

Core Providers
ReactDOM.createRoot(document.getElementById('root')).render(
  <React.StrictMode>
    <App />
  </React.StrictMode>
);
""")

    (src / "App.jsx").write_text("""\
import React, { useState } from 'react';
import Card from './Card';

export default function App() {
  const [open, setOpen] = useState(false);
  return (
    <main className={layout ${open ? 'open' : ''}}>
      <Card title="Welcome" onClick={() => setOpen(!open)} />
    </main>
  );
}
""")

    (src / "Card.jsx").write_text("""\
import React from 'react';

/* A plain card. */
export default function Card({ title, onClick }) {
  return <section className={`card ${title}`} onClick={onClick}>{title}</section>;
}
""")

    modules = tmp_path / "node_modules" / "react"
    modules.mkdir(parents=True)
    (modules / "index.js").write_text("Not Scanned\n")
    return tmp_path


def _engine(root: Path) -> RepairEngine:
    config = BlankfixConfig()
    config.engine.max_retries = 3
    return RepairEngine(root, config, sleep=lambda s: None)


class TestScanFixRescan:
    def test_full_workflow(self, blank_screen_project: Path):
        engine = _engine(blank_screen_project)
        main = blank_screen_project / "src" / "main.jsx"
        app = blank_screen_project / "src" / "App.jsx"
        original_main = main.read_text()
        original_app = app.read_text()

        # Step 1: scan
        before = engine.scan()
        assert isinstance(before, ScanResult)
        fixable = sorted((f.file_path.name, f.fix_kind) for f in before.findings if f.is_auto_fixable)
        assert fixable == [("App.jsx", FixKind.ADD_BACKTICKS), ("main.jsx", FixKind.COMMENT_LINE)]

        # Step 2: fix
        outcome = engine.repair()
        assert len(outcome.applied) == 2
        assert outcome.verification.all_passed
        assert "// Core Providers" in main.read_text()
        assert "className={`layout ${open ? 'open' : ''}`}" in app.read_text()

        # Step 3: rescan finds nothing left to fix
        after = engine.scan()
        assert isinstance(after, ScanResult)
        assert after.auto_fixable_count == 0
        assert after.files_examined == before.files_examined

        # Step 4: undo restores the original sources
        results = RollbackManager(blank_screen_project).rollback()
        assert all(r.success for r in results)
        assert main.read_text() == original_main
        assert app.read_text() == original_app

    def test_second_repair_is_a_no_op(self, blank_screen_project: Path):
        engine = _engine(blank_screen_project)
        engine.repair()
        fixed = {p: p.read_text() for p in (blank_screen_project / "src").glob("*.jsx")}

        outcome = engine.repair()

        assert outcome.applied == []
        assert {p: p.read_text() for p in (blank_screen_project / "src").glob("*.jsx")} == fixed
