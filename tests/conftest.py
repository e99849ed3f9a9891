"""Test configuration and fixtures for codefence."""

import pytest


def pytest_addoption(parser):
    """Add custom command-line options for tests."""
    parser.addoption("--run-cli-tests", action="store_true", default=False, help="Run CLI integration tests (slow)")


@pytest.fixture
def sample_project(tmp_path):
    """Create a small mixed-language project.

    Layout:
        .git/config
        .gitignore            (ignores target/ and *.log)
        Cargo.lock
        Cargo.toml
        README.md
        debug.log
        examples/example.rs
        src/lib.rs            (contains a #[cfg(test)] module)
        src/main.rs
        src/foo_test.rs
        target/debug/build.rs
        tests/integration.rs
        web/app.ts
        web/app.spec.ts
    """
    files = {
        ".git/config": "[core]\n",
        ".gitignore": "target/\n*.log\n",
        "Cargo.lock": "# generated\n",
        "Cargo.toml": '[package]\nname = "demo"\n',
        "README.md": "# Demo\n",
        "debug.log": "noise\n",
        "examples/example.rs": 'fn main() { println!("Hello world!"); }',
        "src/lib.rs": (
            "pub fn add(a: i32, b: i32) -> i32 {\n"
            "    a + b\n"
            "}\n"
            "\n"
            "#[cfg(test)]\n"
            "mod tests {\n"
            "    #[test]\n"
            "    fn adds() {\n"
            "        assert_eq!(super::add(1, 2), 3);\n"
            "    }\n"
            "}\n"
        ),
        "src/main.rs": "fn main() {}\n",
        "src/foo_test.rs": "#[test]\nfn foo() {}\n",
        "target/debug/build.rs": "// build output\n",
        "tests/integration.rs": "#[test]\nfn it_works() {}\n",
        "web/app.ts": "export const app = 1;\n",
        "web/app.spec.ts": "test('app', () => {});\n",
    }
    for relative_path, content in files.items():
        path = tmp_path / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return tmp_path


@pytest.fixture(autouse=True)
def reset_signal_flags():
    """Clear the process-wide signal flags so one test's broken pipe does not stop another's output."""
    from codefence.cli.signal_handler import signal_handler

    yield
    signal_handler.sigpipe_received.clear()
    signal_handler.sigint_received.clear()
