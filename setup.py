from setuptools import setup, find_packages

setup(
    name="expectimax_2048_agent",
    version="0.1.0",
    packages=find_packages(include=["agent2048", "agent2048.*"]),
    py_modules=["demo_expectimax"],
    python_requires=">=3.8",
    install_requires=[
        "numpy",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
