import setuptools

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setuptools.setup(
    name="launcherprobe",
    version="0.1.0",
    author="launcherprobe contributors",
    description="Detect installed game launchers and enumerate the games they manage",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=setuptools.find_packages("src"),
    package_dir={"": "src"},
    classifiers=[
        "Operating System :: Microsoft :: Windows",
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: GNU Affero General Public License v3 or later (AGPLv3+)",
        "Topic :: Games/Entertainment",
    ],
    install_requires=["vdf>=3,<4", "appdirs>=1.4"],
    extras_require={"test": ["pytest"]},
    python_requires=">=3.9",
)
