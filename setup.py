from setuptools import setup, find_namespace_packages

setup(
    name="meetinglog",
    version="0.1.0",
    packages=find_namespace_packages(where="src", include=["meetinglog*"]),
    package_dir={"": "src"},
    python_requires=">=3.11",
    install_requires=[
        "pydantic>=2.0.0",
        "httpx",
        "fastapi",
        "uvicorn",
        "PyYAML",
        "markdown-it-py",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
        ],
    },
)
