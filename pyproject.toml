[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "resembla"
version = "0.1.0"
description = "N-gram string databases, kana and romaji normalisation and letter mismatch costs for resemblance search"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "similarity",
    "approximate-string-matching",
    "simstring",
    "cdb",
    "murmurhash",
    "ngram",
    "japanese",
    "romaji",
    "kana",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Natural Language :: Japanese",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Processing :: Linguistic",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["resembla"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
