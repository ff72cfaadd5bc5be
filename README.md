# gsstats

Readers for the power-state residency statistics that a device kernel
exposes through sysfs and debugfs nodes, together with two small command
line helpers: one that dumps ramdump side files for a bug report, and one
that drives touch-controller interactive calibration.

## Installation

```
pip install .
```

No third-party libraries are required. For running the tests:

```
pip install .[test]
pytest
```

## Residency providers

Every provider is a `gsstats.model.StateResidencyDataProvider` with two
methods:

- `get_state_residencies()` returns a mapping of power entity name to a
  list of `StateResidency` records (`id`, `total_time_in_state_ms`,
  `total_state_entry_count`, `last_entry_timestamp_ms`).
- `get_info()` returns a mapping of power entity name to a list of `State`
  records (`id` and `name`).

Failures to open or parse a statistics node in `get_state_residencies()`
raise `gsstats.model.PowerStatsError`.

| Module | Class | Reads |
| --- | --- | --- |
| `gsstats.dvfs` | `DvfsStateResidencyDataProvider(path, clock_rate, configs)` | a DVFS stats node, configured with `DvfsConfig` entries |
| `gsstats.adaptive_dvfs` | `AdaptiveDvfsStateResidencyDataProvider(path, clock_rate, power_entities)` | a DVFS stats node whose states come from each entity's `time_in_state` table |
| `gsstats.devfreq` | `DevfreqStateResidencyDataProvider(name, path)` | `<path>/time_in_state` of a devfreq device |
| `gsstats.cpupm` | `CpupmStateResidencyDataProvider(path, config, sleep_path, sleep_config)` | a CPU power-management node plus a sleep-duration node, configured with `CpupmConfig` |
| `gsstats.display_mrr` | `DisplayMrrStateResidencyDataProvider(name, path)` | `available_disp_stats` and `time_in_state` appended directly to the `path` prefix |
| `gsstats.tpu_dvfs` | `TpuDvfsStateResidencyDataProvider(path, frequencies, clock_rate)` | a TPU per-uid time-in-frequency table |
| `gsstats.ufs` | `UfsStateResidencyDataProvider(prefix)` | UFS hibernate counters under a path prefix |

Notes on particular providers:

- DVFS and devfreq entity names gain the suffix `-DVFS`. Raw DVFS and TPU
  durations are divided by `clock_rate`.
- `AdaptiveDvfsStateResidencyDataProvider` takes pairs of
  (entity name, frequency table directory). Each table is read with
  `gsstats.adaptive_dvfs.read_frequency_states`, which returns
  (`"<freq/1000>MHz"`, frequency) pairs in descending order. Entities whose
  table cannot be read are logged and left out.
- `DevfreqStateResidencyDataProvider.parse_time_in_state()` returns
  (frequency in Hz, time in ms) pairs. `get_info()` returns an empty mapping
  when the file cannot be read.
- `CpupmStateResidencyDataProvider` adds the system sleep time (read from
  the line matching the last prefix of `sleep_config`, in nanoseconds) to
  every state's time.
- `gsstats.display_mrr.parse_config(line, with_duration)` parses
  `state resX resY rr [duration]` into a `DisplayConfig` and a duration.
  Display states are named `On`, `HBM`, `LP` and `Off`, the first three
  followed by `: <x>x<y>@<rr>`.
- The TPU provider reports under `TPU-DVFS`; the UFS provider reports under
  `UFS` with a single `HIBERN8` state, and `gsstats.ufs.read_stat(path)`
  yields 0 for a missing or unparsable node.

Example:

```python
from gsstats.devfreq import DevfreqStateResidencyDataProvider

provider = DevfreqStateResidencyDataProvider("MIF", "/sys/class/devfreq/17000010.devfreq_mif")
for entity, states in provider.get_info().items():
    print(entity, [state.name for state in states])
print(provider.get_state_residencies())
```

## Commands

### gsstats-ramdump

```
gsstats-ramdump [--dir DIR]
```

Prints the bootloader log `abl.log` kept in the ramdump directory
(default `/mnt/vendor/ramdump`) with its header fields, then `acpm.lst` and
`s2d.lst` gzipped and base64 encoded, each preceded by the command that
decodes it. The pieces are also available as functions in
`gsstats.ramdump`: `parse_abl_log` (returns an `AblLog`), `format_abl_log`,
`gzip_base64` and `dump_gzipped_file_in_base64`.

### gsstats-gti-ical

```
gsstats-gti-ical <device> <command>
```

Runs touch interactive calibration on a touch interface. `device` picks
the second interface when it is a prefix of `1`, `gti1` or `gti.1`, and the
first otherwise. `command` is `read` (or a prefix of it) to read the
current result from the calibration node, or any other word to write it to
the node. Without both arguments, both interfaces are marked done and
nothing else happens. The calibration state and result properties are
printed as `[name]: [value]` when the command finishes.

From Python, `gsstats.gti_ical.select_target(device)` returns the index
(0 or 1) of the interface a device argument names, and
`run_calibration(args, properties, targets)` runs the sequence, writing the
properties into the mapping you pass and using the given `IcalTarget`
entries (by default `DEFAULT_TARGETS`).

## What this package does not do

- It has no service that collects or publishes the residency statistics;
  callers construct the providers and query them directly.
- `gsstats-gti-ical` does not set system properties; it keeps them in a
  mapping and prints them.