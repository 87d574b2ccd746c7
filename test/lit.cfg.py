# -*- Python -*-

import os
import platform
import shutil
import subprocess
import sys

import lit.formats

# Configuration file for the 'lit' test runner.

# name: The name of this test suite.
config.name = 'evmfmt'

# testFormat: The test format to use to interpret tests.
config.test_format = lit.formats.ShTest(True)

# suffixes: A list of file extensions to treat as test files.
config.suffixes = ['.test']

# test_source_root: The root path where tests are located.
config.test_source_root = os.path.dirname(__file__)

# test_exec_root: The root path where tests should be run.
config.test_exec_root = os.path.join(config.test_source_root, 'Output')

# Find evmfmt
if hasattr(config, 'evmfmt') and config.evmfmt:
    evmfmt_path = config.evmfmt
else:
    evmfmt_path = shutil.which('evmfmt')

if evmfmt_path:
    config.substitutions.append(('%evmfmt', evmfmt_path))
else:
    config.substitutions.append(('%evmfmt', 'evmfmt'))

# Test directories
config.substitutions.append(('%S', config.test_source_root))
config.substitutions.append(('%p', config.test_source_root))
config.substitutions.append(('%{inputs}', os.path.join(config.test_source_root, 'Inputs')))

# Project root directory (parent of test directory)
project_root = os.path.dirname(config.test_source_root)
config.substitutions.append(('%{project_root}', project_root))

# Platform-specific features
if platform.system() == 'Darwin':
    config.available_features.add('darwin')
elif platform.system() == 'Linux':
    config.available_features.add('linux')


# Check if evmfmt is available
def check_evmfmt():
    if not evmfmt_path:
        return False
    try:
        subprocess.run([evmfmt_path, '--help'], check=True, capture_output=True)
    except (OSError, subprocess.CalledProcessError):
        return False
    return True


if check_evmfmt():
    config.available_features.add('evmfmt')

# Add 'not' command
not_path = shutil.which('not')
if not not_path:
    # Try common locations
    for path in ['/usr/local/opt/llvm/bin', '/opt/homebrew/opt/llvm/bin', '/usr/bin']:
        candidate = os.path.join(path, 'not')
        if os.path.exists(candidate):
            not_path = candidate
            break
if not_path:
    config.substitutions.append(('not', not_path))

# Find and add FileCheck (LLVM's, or the 'filecheck' Python port)
filecheck_path = None
for path in ['/usr/local/opt/llvm/bin', '/opt/homebrew/opt/llvm/bin', '/usr/bin']:
    candidate = os.path.join(path, 'FileCheck')
    if os.path.exists(candidate):
        filecheck_path = candidate
        break

if not filecheck_path:
    filecheck_path = shutil.which('FileCheck') or shutil.which('filecheck')

# If FileCheck is not found, tests will fail but we'll let lit report it
config.substitutions.append(('FileCheck', filecheck_path or 'FileCheck'))

# Environment variables
config.environment['NO_COLOR'] = '1'
if not hasattr(config, 'evmfmt') or not config.evmfmt:
    config.environment['PYTHONPATH'] = os.pathsep.join(sys.path)
