from setuptools import find_packages, setup

setup(
    name="release-store",
    version="0.1.0",
    packages=find_packages(
        include=[
            "rls_common",
            "rls_common.*",
            "rls_persistence",
            "rls_persistence.*",
            "rls_admin",
            "rls_admin.*",
        ]
    ),
    install_requires=[
        "aiosqlite>=0.19.0",
        "click>=8.1.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
            "pytest-xdist>=3.3.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "rls-admin=rls_admin.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
