from setuptools import setup, find_packages

setup(
    name="flowgraph",
    version="0.1.0",
    packages=find_packages("src", exclude=["tests", "tests.*"]),
    package_dir={"": "src"},
    install_requires=[
        "pydantic>=2",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
        ],
    },
    python_requires=">=3.9",
    description="minimal graph execution engine for composing LLM pipelines",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
)
