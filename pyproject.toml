[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pktscope"
version = "0.1.0"
description = "Read, write and inspect pcap capture files, decode IP/TCP/UDP headers and list network interfaces."
requires-python = ">=3.10"
keywords = ["pcap", "packet", "capture", "savefile", "network", "udp", "tcp", "ipv6", "hexdump"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking :: Monitoring",
    "Typing :: Typed",
]
dependencies = [
    "psutil",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
pktscope-iflist = "pktscope.iflist:main"
pktscope-udpdump = "pktscope.udpdump:main"
pktscope-dump = "pktscope.dump:main"

[tool.hatch.build.targets.wheel]
packages = ["pktscope"]

[tool.hatch.build.targets.sdist]
include = [
    "pktscope",
    "tests",
]

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
