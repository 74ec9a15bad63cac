from setuptools import setup, find_packages


setup(
    name="nginx-roundtrip",
    version="0.1.0",
    description="CLI-инструмент и библиотека для правки upstream/server/location в nginx.conf с сохранением исходной разметки",
    author="Daniil Astrouski",
    author_email="shelovesuastra@gmail.com",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    install_requires=[
        "typer[all]>=0.9.0",
        "rich>=13.0.0",
        "requests>=2.25.0",
        "pyyaml>=5.4",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
        ],
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "nginx-roundtrip=commands.cli:app",
        ],
    },
    python_requires=">=3.8",
)
