from setuptools import setup, find_packages

setup(
    name="beeptimer",
    version="0.1.0",
    description="Hands-free session timer started and stopped by acoustic beep codes",
    author="",
    python_requires=">=3.8",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "pyaudio>=0.2.11",
        "numpy>=1.21.0",
        "scipy>=1.7.0",
        "rich>=12.5.0",
        "pyyaml>=6.0.0",
        "pypubsub>=4.0.3",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "beeptimer=beeptimer.main:main",
        ],
    },
)
