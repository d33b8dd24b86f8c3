from setuptools import setup, find_packages

# Read requirements from requirements.txt
with open('requirements.txt', 'r') as f:
    requirements = [line.strip() for line in f if line.strip() and not line.startswith('#')]

setup(
    name="trade-recon",
    version="0.3.0",
    description="Trade reconciliation and journal import pipeline for platform execution exports",
    author="Trade-Recon Team",
    packages=find_packages(include=['trade_recon', 'trade_recon.*']),
    install_requires=requirements,
    extras_require={
        'dev': [
            'pytest>=7.4.0',
            'pytest-cov>=4.1.0',
            'black>=23.9.0',
            'ruff>=0.1.0',
        ]
    },
    entry_points={
        'console_scripts': [
            'trade-recon=trade_recon.cli.journal:cli',
        ],
    },
    python_requires='>=3.11',
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Financial and Insurance Industry",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3.11",
    ],
)
