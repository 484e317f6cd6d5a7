# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Merge jobs - Example of folding partial stores from parallel jobs.

A didactic example: each job fills the same histograms for a few detector
channels; the partial stores are merged into one and queried.

Run it with ``python examples/detector_jobs/merge_jobs.py``.
"""

from __future__ import annotations

import logging

import numpy as np

from genro_mergestore import Counter, Histogram1D, Histogram2D, MergeStore

CHANNELS = ('ch1', 'ch2', 'ch3')


def run_job(seed: int, events: int = 1000) -> MergeStore:
    """Simulate one job and return its partial store."""
    rng = np.random.default_rng(seed)
    store = MergeStore(f'job{seed}', 'partial statistics')
    store.adopt(Counter('events', events))
    for channel in CHANNELS:
        det = store.create_proxy(f'/DET/{channel}/', create_if_needed=True)
        adc = Histogram1D('adc', 50, 0.0, 100.0, title=f'ADC {channel}')
        adc.fill_many(rng.normal(50.0, 10.0, events))
        det.adopt(adc)

        charge = Histogram2D('charge', 20, 0.0, 100.0, 20, 0.0, 10.0, title='charge map')
        for x, y in zip(rng.uniform(0, 100, events), rng.exponential(2.0, events)):
            charge.fill(x, y)
        det.adopt(charge)
    return store


def main() -> None:
    logging.basicConfig(level=logging.INFO, format='%(levelname)s %(name)s: %(message)s')

    total = MergeStore('stats', 'merged statistics')
    merged = total.merge([run_job(seed) for seed in range(4)])
    print(f'Merged {merged} stores')
    print(total.report('/DET/*/adc'))

    adc_sum = total.get_sum('/DET/ch1,ch2/adc')
    print(f'ADC ch1+ch2: {adc_sum.summary()}')

    px = total.get_view('/DET/ch1/charge:px')
    print(f'{px.name}: {px.summary()}')

    print(f'Estimated size: {total.estimate_size()} bytes')
    total.get('/DET/ch9/adc')
    total.log_messages(total.name)


if __name__ == '__main__':
    main()
