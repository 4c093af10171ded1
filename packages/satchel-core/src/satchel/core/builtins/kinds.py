from __future__ import annotations

import logging

from satchel.core.bundles import (
    Bundle,
    ExternalScriptBundle,
    ExternalStylesheetBundle,
    HtmlTemplateBundle,
    ScriptBundle,
    StylesheetBundle,
)
from satchel.core.registry.kinds import register_bundle_kind
from satchel.core.spec import BundleDescriptor

log = logging.getLogger("satchel.core.builtins.kinds")


@register_bundle_kind(
    "script",
    bundle_type=ScriptBundle,
    file_pattern="*.js;*.coffee",
    exclude=r"-vsdoc\.js$",
    descriptor_filenames=("scriptbundle.txt",),
)
def build_script_bundle(path: str, descriptor: BundleDescriptor) -> Bundle:
    if descriptor.external_url:
        return ExternalScriptBundle(path, descriptor.external_url, descriptor.fallback_condition)
    return ScriptBundle(path)


@register_bundle_kind(
    "stylesheet",
    bundle_type=StylesheetBundle,
    file_pattern="*.css;*.less",
    descriptor_filenames=("stylesheetbundle.txt",),
)
def build_stylesheet_bundle(path: str, descriptor: BundleDescriptor) -> Bundle:
    if descriptor.external_url:
        if descriptor.fallback_condition:
            log.warning("stylesheet bundle %s: fallbackCondition is not supported, ignoring", path)
        return ExternalStylesheetBundle(path, descriptor.external_url)
    return StylesheetBundle(path)


@register_bundle_kind(
    "htmltemplate",
    bundle_type=HtmlTemplateBundle,
    file_pattern="*.htm;*.html",
    descriptor_filenames=("htmltemplatebundle.txt",),
)
def build_html_template_bundle(path: str, descriptor: BundleDescriptor) -> Bundle:
    if descriptor.external_url:
        log.warning("html template bundle %s: [external] url is not supported, ignoring", path)
    return HtmlTemplateBundle(path)
