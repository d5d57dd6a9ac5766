from setuptools import setup, find_packages

setup(
    name='glslassembler',
    version='0.1.0',
    author='nassimberrada',
    author_email='your.email@example.com',
    description='Resolves #include directives across GLSL modules and maps assembled lines back to their sources.',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    url='https://github.com/yourusername/glslassembler',
    packages=find_packages(exclude=['tests', 'tests.*', 'examples']),
    include_package_data=True,
    install_requires=[
        'watchdog',
        'moderngl',
    ],
    extras_require={
        'test': [
            'pytest',
        ]
    },
    entry_points={
        'console_scripts': [
            'glslassembler=glslassembler.cli:main',
        ],
    },
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Topic :: Multimedia :: Graphics :: 3D Rendering',
        'Topic :: Software Development :: Pre-processors',
    ],
    python_requires='>=3.6',
)
