from setuptools import setup, find_packages

setup(
    name="form-validation-lib",
    version="0.1.0",
    description="Declarative field validation for UI forms with real-time debounced feedback",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={
        'form_validation': ['default-config.yaml', 'schemas/*.json'],
    },
    include_package_data=True,
    install_requires=[
        'pyyaml>=6.0',
        'jsonschema>=4.17.0',
        'requests>=2.28.0',
    ],
    extras_require={
        'test': ['pytest>=7.0'],
    },
    python_requires='>=3.9',
)
