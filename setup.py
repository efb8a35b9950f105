from pathlib import Path

from setuptools import find_packages, setup

NAME = "invoicekit"
VERSION = "0.1.0"
DESCRIPTION = "Numeração de documentos, cliente da API e definições para a aplicação de facturação."

README = Path("DESIGN.md")
LONG_DESCRIPTION = README.read_text(encoding="utf-8") if README.exists() else DESCRIPTION

INSTALL_REQUIRES = [
    "requests>=2.31",
    "tenacity>=8.2",
    "openpyxl>=3.1",
    "pydantic>=2.5",
]

EXTRAS_REQUIRE = {
    "test": ["pytest>=7.4"],
}

setup(
    name=NAME,
    version=VERSION,
    description=DESCRIPTION,
    long_description=LONG_DESCRIPTION,
    long_description_content_type="text/markdown",
    python_requires=">=3.10",
    package_dir={"": "src"},
    packages=find_packages("src"),
    install_requires=INSTALL_REQUIRES,
    extras_require=EXTRAS_REQUIRE,
    entry_points={
        "console_scripts": [
            "invoicekit = invoicekit.cli:main",
        ],
    },
)
