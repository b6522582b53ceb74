"""Fixed file contents written into a new Teensy project."""

TARGET_JSON_FILE = "thumbv7em-none-eabi.json"
MAIN_RS_FILE = "src/main.rs"
CARGO_CONFIG_FILE = ".cargo/config"

TARGET_JSON = """{
    "arch": "arm",
    "cpu": "cortex-m4",
    "data-layout": "e-m:e-p:32:32-i64:64-v128:64:128-a:0:32-n32-S64",
    "disable-redzone": true,
    "executables": true,
    "llvm-target": "thumbv7em-none-eabi",
    "morestack": false,
    "os": "none",
    "relocation-model": "static",
    "target-endian": "little",
    "target-pointer-width": "32",
    "no-compiler-rt": true,
    "pre-link-args": [
        "-mcpu=cortex-m4", "-mthumb",
        "-Tlayout.ld"
    ],
    "post-link-args": [
        "-lm", "-lgcc", "-lnosys"
    ]
}
"""

EXAMPLE_MAIN = """
#![feature(plugin, start)]
#![no_std]
#![plugin(macro_zinc)]

extern crate zinc;

use core::option::Option::Some;

use zinc::hal::cortex_m4::systick;
use zinc::hal::k20::{pin, watchdog};
use zinc::hal::pin::Gpio;

/// Wait the given number of SysTick ticks
pub fn wait(ticks: u32) {
  let mut n = ticks;
  // Reset the tick flag
  systick::tick();
  loop {
    if systick::tick() {
      n -= 1;
      if n == 0 {
        break;
      }
    }
  }
}

#[zinc_main]
pub fn main() {
  zinc::hal::mem_init::init_stack();
  zinc::hal::mem_init::init_data();
  watchdog::init(watchdog::State::Disabled);

  // Onboard LED of the Teensy 3.1/3.2 is on pin 13 (PTC5)
  let led1 = pin::Pin::new(pin::Port::PortC, 5, pin::Function::Gpio, Some(zinc::hal::pin::Out));

  systick::setup(systick::ten_ms().unwrap_or(480000));
  systick::enable();
  loop {
    led1.set_high();
    wait(10);
    led1.set_low();
    wait(10);
  }
}
"""

MANIFEST_ADDITIONS = """
[features]
default = ["mcu_k20"]
mcu_k20 = ["zinc/mcu_k20"]

[dependencies]
zinc = { path = "../zinc" }
macro_zinc = { path = "../zinc/macro_zinc" }
rust-libcore = "*"
"""

CARGO_CONFIG = """
[build]
target = "thumbv7em-none-eabi"

[target.thumbv7em-none-eabi]
linker = "arm-none-eabi-gcc"
ar = "arm-none-eabi-ar"
"""


def scaffold_files() -> dict[str, str]:
    """Return the files written into a new project, keyed by relative path."""
    return {
        TARGET_JSON_FILE: TARGET_JSON,
        MAIN_RS_FILE: EXAMPLE_MAIN,
        CARGO_CONFIG_FILE: CARGO_CONFIG,
    }
