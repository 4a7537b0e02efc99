[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "worm"
version = "0.1.0"
description = "Chat bot pieces: command handlers, an AI assistant client, system info and a Genshin redeem-code notifier"
requires-python = ">=3.10"
keywords = ["chat", "bot", "discord", "redeem-codes", "genshin", "ai", "sqlite"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Framework :: AsyncIO",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Chat",
]
dependencies = [
    "httpx>=0.25",
    "python-dotenv>=1.0",
    "psutil>=5.9",
]

[project.optional-dependencies]
test = [
    "pytest>=7.4",
    "pytest-asyncio>=0.23",
    "respx>=0.21",
]

[project.scripts]
worm = "worm.app:main"

[tool.hatch.build.targets.wheel]
packages = ["worm"]

[tool.hatch.build.targets.sdist]
include = ["worm", "tests", "pyproject.toml", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
