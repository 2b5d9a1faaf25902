from pathlib import Path
from setuptools import setup, find_packages

__version__ = "1.0.0"

requirements_file = Path(__file__).with_name("requirements.txt")
install_requires = [
    line.strip()
    for line in requirements_file.read_text(encoding="utf8").splitlines()
    if line.strip() and not line.strip().startswith("#")
]


setup(
    name="tlschecker",
    version=__version__,
    description="Discover which TLS protocol versions a host negotiates, with the cipher suite and certificate presented for each.",
    classifiers=[
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "License :: OSI Approved :: GNU General Public License v3 or later (GPLv3+)",
    ],
    zip_safe=False,
    install_requires=install_requires,
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["tlschecker=tlschecker.cli.__main__:main"],
    },
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    package_data={"tlschecker": ["config/*.yaml"]},
    python_requires=">=3.9",
    long_description="""
# TLS Checker

Check which TLS protocol versions (TLS 1.0, 1.1, 1.2, 1.3) a host accepts.
Every version is probed on its own connection forced to exactly that version,
and each supported version reports the negotiated cipher suite and the leaf
certificate subject, issuer, validity and signature algorithm.

Certificates are deliberately not trusted or verified, the goal is protocol
discovery and a self-signed or expired certificate still completes the probe.

## Basic Usage

`python3 -m pip install -U tlschecker`

```py
import tlschecker

report = tlschecker.check_host("ssllabs.com")
for version, result in report.items():
    print(version.label, "supported" if result.supported else result.failure_reason)
```

On the command-line:

```sh
tlschecker google.com
tlschecker            # interactive mode
tlschecker --help
```
    """,
    long_description_content_type="text/markdown",
)
