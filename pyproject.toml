[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "configcrypto"
version = "0.1.0"
description = "Envelope encryption (AES-256-GCM) for configuration values, with static and KMS-backed key providers"
requires-python = ">=3.10"
dependencies = [
    "cryptography",
]
keywords = [
    "encryption",
    "envelope-encryption",
    "aes-gcm",
    "configuration",
    "kms",
    "vault",
    "key-rotation",
]
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
    "Topic :: Security :: Cryptography",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["configcrypto"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
