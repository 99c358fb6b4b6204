from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

setup(
    name="jwt-pizza-ui-tests",
    version="1.0.0",
    description="Playwright end-to-end tests for the JWT Pizza frontend with an intercepted mock backend",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["pizza_ui_tests", "pizza_ui_tests.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Testing",
        "Framework :: Pytest",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.10",
    install_requires=requirements,
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.24",
        ],
    },
    entry_points={
        "console_scripts": [
            "jwt-pizza-mock-api=pizza_ui_tests.mock_pizza_api:main",
        ],
    },
)
