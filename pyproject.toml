[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "jsonldlang"
version = "0.1.0"
description = "Error-tolerant JSON-LD tokenizer, parser and triple extractor for editor tooling"
requires-python = ">=3.10"
dependencies = []
keywords = ["json-ld", "rdf", "linked-data", "parser", "tokenizer", "triples"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Processing :: Markup",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["jsonldlang"]

[tool.pytest.ini_options]
addopts = "-ra"
