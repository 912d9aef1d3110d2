from setuptools import setup, find_packages

setup(
    name="path-utils",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    description="Keep directories (or an app's config directory) on PATH-like environment variables.",
    long_description=open("README.md", encoding="utf-8").read(),
    long_description_content_type="text/markdown",
    python_requires=">=3.8",
    install_requires=[
        "rich",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "path-utils=path_utils.cli:main",
        ]
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
)
