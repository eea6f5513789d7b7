import setuptools

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setuptools.setup(
    name="inject-commands",
    version="0.1.0",
    author="wangguanran",
    author_email="elvans.wang@gmail.com",
    description="Run external scripts at build-tool lifecycle hooks.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=setuptools.find_packages(include=["inject_commands", "inject_commands.*"]),
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires='>=3.10',
    install_requires=[
        'pydantic>=2',
        'toml',
    ],
    extras_require={
        'test': [
            'pytest',
        ],
    },
    entry_points={
        'console_scripts': [
            'inject-commands = inject_commands.__main__:main',
        ],
    },
)
