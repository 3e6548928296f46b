from __future__ import annotations

import json
from pathlib import Path
from textwrap import dedent
from typing import Dict, List, Optional

import pytest


class MemoryStorage:
    """In-memory storage provider."""

    def __init__(self) -> None:
        self.blobs: Dict[str, bytes] = {}
        self.content_types: Dict[str, str] = {}

    def upload_file(self, path: str, data: bytes, *, content_type: str = "application/octet-stream") -> None:
        self.blobs[path] = data
        self.content_types[path] = content_type

    def download_file(self, path: str) -> Optional[bytes]:
        return self.blobs.get(path)

    def list_files(self, prefix: str) -> List[str]:
        return sorted(k for k in self.blobs if k.startswith(prefix))

    def delete_file(self, path: str) -> None:
        self.blobs.pop(path, None)


class FailingStorage:
    """Storage provider whose every call fails."""

    def __init__(self) -> None:
        self.calls: List[str] = []

    def upload_file(self, path: str, data: bytes, *, content_type: str = "application/octet-stream") -> None:
        self.calls.append("upload")
        raise RuntimeError("upload rejected")

    def download_file(self, path: str) -> Optional[bytes]:
        self.calls.append("download")
        raise RuntimeError("download rejected")

    def list_files(self, prefix: str) -> List[str]:
        self.calls.append("list")
        raise RuntimeError("list rejected")

    def delete_file(self, path: str) -> None:
        self.calls.append("delete")
        raise RuntimeError("delete rejected")


def write_files(root: Path, files: Dict[str, str]) -> Path:
    for rel, text in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dedent(text).lstrip("\n"), encoding="utf-8")
    return root


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
def failing_storage():
    return FailingStorage()


@pytest.fixture
def react_project(tmp_path):
    """A small React Router app: main -> App -> routes -> pages -> components."""
    root = tmp_path / "shop"
    root.mkdir()
    (root / "package.json").write_text(
        json.dumps({"dependencies": {"react": "^18.2.0", "react-router-dom": "^6.22.0"}}),
        encoding="utf-8",
    )
    return write_files(
        root,
        {
            "src/main.tsx": """
                import App from "./App";
                import "./styles/global.css";
                render(<App />);
            """,
            "src/App.tsx": """
                import { RouterProvider } from "react-router-dom";
                import { router } from "./routes";

                export default function App() {
                  return <RouterProvider router={router} />;
                }
            """,
            "src/routes.tsx": """
                import { createBrowserRouter } from "react-router-dom";
                import Layout from "./components/Layout";
                import Home from "./pages/Home";
                import { Dashboard } from "./pages";

                const Settings = lazy(() => import("./pages/Settings"));

                export const router = createBrowserRouter([
                  {
                    path: "/",
                    element: <Layout />,
                    children: [
                      { index: true, element: <Home /> },
                      { path: "dashboard", element: <Dashboard /> },
                      { path: "settings", element: <Settings /> },
                    ],
                  },
                ]);
            """,
            "src/pages/index.ts": """
                export { Dashboard } from "./Dashboard";
            """,
            "src/pages/Dashboard.tsx": """
                import { Button } from "../components/Button";

                export function Dashboard() {
                  return <Button />;
                }
            """,
            "src/pages/Home.tsx": """
                import { Button } from "../components/Button";

                export default function Home() {
                  return <Button />;
                }
            """,
            "src/pages/Settings.tsx": """
                export default function Settings() {
                  return <div />;
                }
            """,
            "src/pages/Home.test.tsx": """
                import Home from "./Home";

                test("renders", () => render(<Home />));
            """,
            "src/components/Button.tsx": """
                import styles from "./Button.module.css";

                export function Button() {
                  return <button className={styles.btn} />;
                }
            """,
            "src/components/Button.module.css": """
                .btn { color: red; }
            """,
            "src/components/Layout.tsx": """
                export default function Layout() {
                  return <main />;
                }
            """,
            "src/styles/global.css": """
                body { margin: 0; }
            """,
        },
    )
