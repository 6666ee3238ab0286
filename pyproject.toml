[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "aeadkit"
version = "0.1.0"
description = "AEAD ciphers in Python: AES-GCM-SIV, CCM and (X)ChaCha20-Poly1305"
requires-python = ">=3.10"
keywords = ["aead", "aes", "aes-gcm-siv", "ccm", "chacha20poly1305", "xchacha20poly1305", "encryption"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security :: Cryptography",
]
dependencies = [
    "cryptography",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["aeadkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
