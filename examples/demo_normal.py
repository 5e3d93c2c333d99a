#!/usr/bin/env python

import numpy as np
import mixidr
from mixidr import MixtureParameters


def generate_data():
    params = MixtureParameters(pi=0.3, mu1=0.0, mu2=10.0, sigma2=1.0)
    data, _ = mixidr.generate_data(5000, params)
    return data


def recover(data):

    mu = np.mean(data)
    sigma2 = np.var(data)

    # two mirrored guesses end in the same fit with swapped labels
    for init in [MixtureParameters(0.5, mu - 1, mu + 1, sigma2),
                 MixtureParameters(0.5, mu + 1, mu - 1, sigma2)]:
        result = mixidr.em(data, init, progress_callback=mixidr.simple_progress)
        print(result.termination, result.params, result.log_likelihood)

    n_rep = np.sum(mixidr.select_reproducible(result, threshold=0.05))
    print("%d of %d values are reproducible at IDR 5%%" % (n_rep, len(data)))


if __name__ == '__main__':
    data = generate_data()
    recover(data)
