import re

from setuptools import find_packages, setup


with open("pysurvey/__init__.py", "rb") as fh:
    init_text = fh.read().decode()
    VERSION = re.search(r"__version__ = \"(.*?)\"", init_text).group(1)

setup(
    name="pysurvey",
    version=VERSION,
    packages=find_packages(
        exclude=["tests", "tests.*", "examples", "examples.*"]
    ),
    python_requires=">=3.7.0",
    install_requires=[],
    extras_require={"tests": ["pytest"]},
    license="MIT",
    description="Interactive prompts and branching, undoable surveys for the terminal.",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    zip_safe=True,
    entry_points={
        "console_scripts": [
            "pysurvey = pysurvey:cli",
        ],
    },
)
