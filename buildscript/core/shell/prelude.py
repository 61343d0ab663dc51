"""
Script prelude — shell helper functions every compiled script starts with.

The directive emitter and policy wrapper only ever call these helpers,
so the marker formats live in one place:

    fold:begin:<name> / fold:end:<name>     — collapsible log sections
    time:begin:<id> / time:end:<id>:...     — wall-clock timing
"""

from __future__ import annotations

# Shell variable holding the exit status of the last emitted command
RESULT_VAR = "build_result"

# Attempts made by a retried command, including the first one
RETRY_ATTEMPTS = 3

PRELUDE = f"""\
#!/bin/sh

{RESULT_VAR}=0
build_retry_attempts={RETRY_ATTEMPTS}

build_fold() {{
  printf 'fold:%s:%s\\r\\n' "$1" "$2"
}}

build_time_start() {{
  build_timer_id=$1
  build_start_time=$(date +%s)
  printf 'time:begin:%s\\r\\n' "$build_timer_id"
}}

build_time_finish() {{
  build_end_time=$(date +%s)
  printf 'time:end:%s:start=%s,finish=%s,duration=%s\\r\\n' \\
    "$build_timer_id" "$build_start_time" "$build_end_time" \\
    $((build_end_time - build_start_time))
}}

build_assert() {{
  if [ "${RESULT_VAR}" -ne 0 ]; then
    printf '\\033[31;1mThe command %s exited with %s.\\033[0m\\n' "$1" "${RESULT_VAR}"
    exit "${RESULT_VAR}"
  fi
}}

build_retry() {{
  build_attempt=1
  while [ "$build_attempt" -le "$build_retry_attempts" ]; do
    eval "$1"
    {RESULT_VAR}=$?
    if [ "${RESULT_VAR}" -eq 0 ]; then
      return 0
    fi
    if [ "$build_attempt" -lt "$build_retry_attempts" ]; then
      printf '\\033[31;1mThe command %s failed. Retrying, %s of %s.\\033[0m\\n' \\
        "$1" $((build_attempt + 1)) "$build_retry_attempts"
      sleep "${{BUILD_RETRY_SLEEP:-1}}"
    fi
    build_attempt=$((build_attempt + 1))
  done
  printf '\\033[31;1mThe command %s failed %s times.\\033[0m\\n' "$1" "$build_retry_attempts"
  return "${RESULT_VAR}"
}}

build_vers2int() {{
  printf '1%03d%03d%03d%03d' $(printf '%s' "$1" | tr '.' ' ')
}}
"""
