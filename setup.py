from setuptools import setup, find_packages

setup(
    name="jsdoc2md",
    version="1.0.0",
    description="Markdown API documentation from jsdoc-annotated JavaScript, with an MkDocs plugin",
    keywords="jsdoc markdown mkdocs javascript api documentation python",
    author="Pawel Sikora",
    author_email="sikor6@gmail.com",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "mkdocs>=1.4",
        "jinja2>=3.0",
        "markdown>=3.3",
    ],
    extras_require={
        "test": ["pytest"],
    },
    classifiers = [
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: JavaScript",
        "Topic :: Documentation",
        "Topic :: Software Development :: Documentation",
        "Framework :: MkDocs",
    ],
    entry_points={
        "mkdocs.plugins": [
            "jsdoc2md = jsdoc2md.plugin:Jsdoc2mdPlugin",
        ],
        "console_scripts": [
            "jsdoc2md = jsdoc2md.cli:main",
        ],
    },
)
