"""囲碁（簡易版）MCTS のパッケージ定義

使用方法:
    pip install -e ".[test]"
"""

from setuptools import find_namespace_packages, setup

setup(
    name="go-mcts",
    version="0.1.0",
    description="Simplified Go played by a one-ply Monte Carlo Tree Search",
    python_requires=">=3.9",
    packages=find_namespace_packages(include=["src", "src.*"]),
    py_modules=["main", "benchmark"],
    install_requires=[
        "numpy",
        "PyYAML",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "go-mcts=main:main",
        ],
    },
)
