"""Setup configuration for Azure RBAC Assignment Tool package."""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="azure-rbac-assignment-tool",
    version="1.0.0",
    author="OI Technologies Platform Engineering",
    author_email="platform-engineering@example.com",
    description="Batch tool that adds or removes Azure role assignments listed in an Excel workbook",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/pacorreia/azure-rbac-assignment-tool",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "License :: Other/Proprietary License",
        "Operating System :: OS Independent",
        "Topic :: System :: Systems Administration",
        "Development Status :: 4 - Beta",
    ],
    python_requires=">=3.8",
    install_requires=[
        "azure-core>=1.29.0",
        "azure-identity>=1.14.0",
        "azure-mgmt-authorization>=4.0.0",
        "azure-mgmt-resource>=23.0.0,<26",
        "azure-mgmt-subscription>=3.1.0",
        "click>=8.1.7",
        "openpyxl>=3.1.0",
        "python-dotenv>=1.0.0",
        "pydantic>=2.4.2",
        "requests>=2.31.0",
        "rich>=13.7.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "azure-rbac-assignment-tool=azure_rbac_assignment_tool.cli:main",
        ],
    },
    include_package_data=True,
    zip_safe=False,
)
